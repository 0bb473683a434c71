from setuptools import setup, find_packages

setup(
    name="pyramid-binarization",
    version="0.1.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    package_dir={"": "."},
    install_requires=[
        "opencv-python",
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
