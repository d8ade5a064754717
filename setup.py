from setuptools import setup, find_packages

setup(
    name='hal-graph',
    version='0.0.1',
    author='Marc Hadfield',
    author_email='marc@vital.ai',
    description='HalGraph: HAL hypermedia document rendering and parsing',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    url='https://github.com/vital-ai/hal-graph',
    packages=find_packages(exclude=["halgraph_test", "halgraph_test.*"]),
    include_package_data=True,

    license='Apache License 2.0',
    install_requires=[
        "pydantic>=2.0",
        "PyYAML",
        "python-dotenv",
        "inflection",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },

    classifiers=[
        "Programming Language :: Python :: 3.11",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.11',
)
