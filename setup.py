from setuptools import setup, find_packages

setup(
    name='backoff-wipysim',
    version='0.1',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'matplotlib',
        'numpy',
        'pandas',
        'simpy',
        'setuptools',
        'tqdm',
    ],
    extras_require={
        'test': ['pytest'],
    },)
