from setuptools import setup

setup(
    name="nrow-engine",
    version="0.1.0",
    description="Computer opponent for N-in-a-row on square boards",
    python_requires=">=3.10",
    py_modules=["board", "constants", "engine", "errors", "eval", "main", "models", "region"],
    packages=["players"],
    install_requires=["matplotlib"],
    extras_require={"test": ["pytest"]},
)
