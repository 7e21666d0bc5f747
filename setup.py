from setuptools import setup, find_namespace_packages

setup(
    name="iamsafe",
    version="0.1.0",
    packages=find_namespace_packages(where="src"),
    package_dir={"": "src"},
    package_data={"": ["*.html"]},
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn[standard]",
        "gunicorn",
        "jinja2",
        "python-multipart",
        "itsdangerous",
        "pydantic>=2.0.0",
        "slowapi",
        "prometheus-client",
        "psycopg2-binary>=2.9.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
