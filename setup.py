import os.path
import setuptools # type: ignore

root_path = os.path.dirname(__file__)

with open(os.path.join(root_path, "README.md"), "r") as fh:
    long_description = fh.read()

setuptools.setup(
    name="barnacle",
    version="0.1.0",
    description="Barnacle: a fact driven rule and story progression engine.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(where="src"),
    package_dir={'': 'src'},

    package_data={
        'barnacle': ['py.typed'],
        'barnacle.data': ['*.toml'],
    },
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    install_requires=[
        "toml",
        "msgpack",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires='>=3.9',
    entry_points={
        'console_scripts': [
            'barnacle = barnacle.sim:main',
        ],
    },
)
