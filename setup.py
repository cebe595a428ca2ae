import re

from setuptools import find_packages, setup

with open('pymass/_version.py', 'r') as f:
    __version__ = re.search(r'__version__ = "(.+)"', f.read()).group(1)

with open('README.md', 'r') as f:
    long_description = f.read()

with open('requirements.txt', 'r') as f:
    requirements = f.read().split()

setup(
    name='pymass',
    version=__version__,
    description='Online mass matrix adaptation for Hamiltonian Monte Carlo',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_packages(include=['pymass', 'pymass.*']),
    install_requires=requirements,
    extras_require={'test': ['pytest']},
    python_requires='>=3.8',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
        'Development Status :: 4 - Beta',
    ],
)
