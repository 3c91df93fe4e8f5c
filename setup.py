from setuptools import setup, find_packages

setup(
    name="qlab",
    version="0.1.0",
    description="State-vector simulation with entanglement and measurement analysis",
    packages=find_packages(include=["qlab", "qlab.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.21",
        "scipy>=1.7",
        "qiskit>=0.45",
        "networkx>=2.6",
    ],
    extras_require={
        "dev": ["pytest>=7.0"],
    },
)
