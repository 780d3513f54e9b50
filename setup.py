from setuptools import setup, find_packages

setup(
    name="flipdot",
    version="0.1.0",
    description="Drive flip-dot display panels over an RS-485 serial link",
    packages=find_packages(include=["flipdot", "flipdot.*"]),
    python_requires=">=3.11",
    install_requires=[
        "numpy>=1.23",
        "Pillow>=9.2",
        "pyserial>=3.5",
    ],
    extras_require={
        "test": ["pytest"],
    },
    tests_require=["pytest"],
    entry_points={
        "console_scripts": ["flipdot=flipdot.main:main"],
    },
)
