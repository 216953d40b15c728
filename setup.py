from setuptools import setup, find_packages

setup(
    name="greenspark",
    version="1.0.0",
    packages=find_packages(exclude=['tests', 'tests.*']),
    py_modules=['main'],
    python_requires='>=3.9',
    install_requires=[
        'firebase-admin>=6.2.0',
        'firebase-functions>=0.1.0',
        'google-cloud-firestore>=2.11.1',
        'google-api-core>=2.11.0',
        'Flask>=2.3.2',
        'Flask-CORS>=4.0.0',
        'PyJWT>=2.8.0',
        'python-dateutil>=2.8.2',
        'python-dotenv>=1.0.0',
        'requests>=2.31.0',
    ],
    extras_require={
        'test': [
            'pytest>=7.4.0',
            'pytest-mock>=3.11.1',
        ],
    },
)
