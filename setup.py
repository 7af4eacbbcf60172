from setuptools import find_packages, setup

setup(
    name="kube-resources",
    version="0.1.0",
    license="Apache License 2.0",

    python_requires=">=3.11",
    description="Typed models and (de)serialization helpers for kubernetes "
                "custom resources, starting with Grafana dashboards.",

    packages=find_packages(exclude=('tests',)),
    package_data={'kube_resources': ['test/fixtures/*/*']},

    install_requires=[
        "Click>=7.0,<9.0",
        "toml>=0.10.0,<0.11.0",
        "ruamel.yaml>=0.17.22,<0.19.0",
        "tabulate>=0.8.6,<0.10.0",
        "pydantic>=2.6,<3.0",
    ],

    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-mock>=3.10",
        ],
    },

    test_suite="tests",

    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.11',
    ],
    entry_points={
        'console_scripts': [
            'kube-resources = kube_resources.cli:root',
        ],
    },
)
