from setuptools import setup, find_packages

setup(
    name="heisenberg",
    version="0.1.0",
    description="Dense, sparse and adaptive quantum circuit simulation with evolutionary circuit search",
    packages=find_packages(include=["heisenberg", "heisenberg.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21",
        "scipy>=1.7",
        "qiskit>=0.45",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
    },
)
