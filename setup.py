from setuptools import setup, find_packages

setup(
    name="algorithmic-recourse",
    version="0.1.0",
    description="Gradient-based counterfactual explanations (algorithmic recourse) for linear classifiers",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "pandas",
        "torch",
        "scikit-learn",
        "pyyaml",
        "tqdm",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
