import setuptools

setuptools.setup(
    name="c3p",
    version="0.1.0",
    description="Congestion controlled tunnels driven by ECN feedback",
    license="BSD-3-Clause",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: System :: Networking",
    ],
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=setuptools.find_packages("src"),
    extras_require={"test": ["pytest"]},
)
