from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as f:
    install_requires = [line for line in f.read().split("\n") if line.strip()]

setup(
    name="hondana",
    version="1.0.0",
    description="Chapter/volume parsing for manga archive filenames",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=["*.tests", "*.tests.*", "tests.*", "tests"]),
    package_data={"hondana": ["exclusions.txt"]},
    python_requires=">=3.8",
    install_requires=install_requires,
    extras_require={"test": ["pytest"]},
    entry_points={"console_scripts": ["hondana = hondana.cli:main"]},
)
