from setuptools import find_packages, setup


def get_requirements(path: str = "requirements.txt"):
    with open(path) as fp:
        return [
            x.strip() for x in fp.read().split("\n") if x.strip() and not x.startswith("#")
        ]


setup(
    name="worker-sentry",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.11",
    install_requires=get_requirements(),
    extras_require={"test": get_requirements("requirements-test.txt")},
)
