from setuptools import setup, find_packages

setup(
    name="pwalign",
    version="0.1.0",
    description="Pairwise sequence alignment: Smith-Waterman, Needleman-Wunsch and overlap, linear and affine gaps",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),

    install_requires=[
        "numpy"
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    python_requires='>=3.9',
)
