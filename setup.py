from setuptools import setup, find_packages

setup(
    name='solsign',
    version='0.1.0',
    description='Offline multi-party signer for Solana wire-format transactions',
    author='solsign developers',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'base58>=2.1.1',
        'pynacl>=1.5.0',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    },
    entry_points={
        'console_scripts': [
            'solsign=solsign.cli:main',
        ],
    },
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
)
