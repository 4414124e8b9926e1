from setuptools import setup, find_packages

setup(
    name='structkv',
    version='0.1.0',
    description='structkv: JSON key-value store on a single relational table',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(include=['structkv', 'structkv.*']),
    install_requires=[         # Add dependencies from requirements.txt
        line.strip() for line in open('requirements.txt').readlines() if line.strip()
    ],
    extras_require={
        'test': ['pytest', 'httpx'],
    },
    author='Carnegie Mellon University, Manufacturing Futures Institute',
    python_requires='>=3.8,<3.14',
    license='BSD-3-Clause'
)
