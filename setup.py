"""
Setup configuration for emotion-synthesis component.
"""

from setuptools import setup, find_packages

setup(
    name='emotion-synthesis',
    version='1.0.0',
    description='Emotional expression synthesis and syntax integration for LSF signing avatars',
    author='LSF Avatar Team',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.11',
    install_requires=[
        'boto3>=1.28.0',
        'botocore>=1.31.0',
        'numpy>=1.24.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.4.0',
            'pytest-asyncio>=0.21.0',
            'pytest-cov>=4.1.0',
            'pylint>=2.17.0',
            'flake8>=6.0.0',
            'black>=23.0.0',
            'mypy>=1.4.0',
        ]
    }
)
