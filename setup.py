import setuptools


with open("README.md") as fp:
    long_description = fp.read()


setuptools.setup(
    name="deploy-iam",
    version="1.0",

    description="IAM users, groups and roles for deployment automation",
    long_description=long_description,
    long_description_content_type="text/markdown",

    packages=setuptools.find_namespace_packages(include=["deploy_iam", "deploy_iam.*"]),

    install_requires=[
        "aws-cdk-lib>=2.0.0",
        "constructs>=10.0.0",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },

    python_requires=">=3.8",
)
