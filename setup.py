import os.path

from setuptools import find_packages, setup


def read(fname):
    path = os.path.join(os.path.dirname(__file__), fname)
    with open(path, "r") as rfile:
        return rfile.read()


metadata = {}
exec(read("qrest/__about__.py"), metadata)


setup(
    name="qrest",
    version=metadata["__version__"],
    description=metadata["__description__"],
    license="Apache-2.0",
    long_description=read("README.rst") + "\n\n" + read("HISTORY.rst"),
    author=metadata["__author__"],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    install_requires=["requests>=2.20", "toolz>=0.10"],
    extras_require={"tests": ["pytest>=6", "pytest-mock>=3"]},
    keywords=["api-wrapper", "http", "rest", "orm", "storage"],
    python_requires=">=3.8",
    packages=find_packages(exclude=("examples", "tests", "docs", "tutorial")),
)
