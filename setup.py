# setup.py

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name='lazyvec',
    version='0.1.0',
    description='A growable array with fused, lazily evaluated elementwise operators',
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=['lazyvec', 'lazyvec.*']),
    install_requires=[
        'numpy>=1.24',
        'pydantic>=2.0',
        'pydantic-settings>=2.0',
        'structlog>=23.1',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'lazyvec-prof=lazyvec.tools.profiler_cli:main',
        ],
    },
    zip_safe=False,
    python_requires='>=3.9',
)
