from setuptools import setup, find_packages

setup(
    name='wowrule',
    version='0.1',
    packages=find_packages(exclude=['tests']),
    install_requires=[
        'luminol >= 0.4',
        'redis >= 5.2.1',
        'numpy >= 1.22.4',
    ],
    extras_require={
        'test': ['pytest'],
    },
    test_suite='tests',
    description='Week-over-week rule anomaly functions for time series, configured from compact baseline strings.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    classifiers=[
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
    ],
    python_requires=">=3.10",
)
