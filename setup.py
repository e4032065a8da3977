from setuptools import setup
from setuptools import find_packages


def main():
    package_dir = {"": "src"}
    packages = find_packages("src")

    install_requires = [
        "numpy>=1.20",
        "molmass",
        "tqdm>=4.0.0",
    ]
    extras_require = {
        "test": [
            "pytest",
            "hypothesis",
        ],
    }

    setup(
        name="atomsite",
        version="0.1.0",
        description="Write macromolecular structures as mmCIF _atom_site loops",
        package_dir=package_dir,
        packages=packages,
        install_requires=install_requires,
        extras_require=extras_require,
        zip_safe=False,
        python_requires=">=3.9",
        entry_points={
            "console_scripts": [
                "structure_to_cif = atomsite.command_line.structure_to_cif:main",
            ]
        },
    )


if __name__ == "__main__":
    main()
