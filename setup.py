from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="freightflow",
    version="0.1.0",
    description="Freight flow redistribution on transport networks under disruption.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*", "examples")),
    package_data={"freightflow.schemas": ["*.json"]},
    include_package_data=True,
    python_requires=">=3.10",
    install_requires=[
        "networkx",
        "pandas",
        "PyYAML",
        "jsonschema",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["freightflow=freightflow.cli:main"]},
)
