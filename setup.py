from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="unitprice",
    version="0.0.1",
    author="Peter Cotton",
    author_email="",
    description="Canonical unit conversion and price normalization",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/petercotton/unitprice",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    package_data={
        'unitprice': ['units/data/*.yaml', 'units/data/*.parquet', 'units/data/*.py'],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=[
        "pandas>=1.3.0",
        "rapidfuzz>=2.0.0",
        "pyarrow>=10.0.0",
        "pyyaml>=6.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0"],
    },
)
