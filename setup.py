from setuptools import setup

config = {
    'description': 'Offline signed URL generation for Google Cloud Storage',
    'version': '0.1',
    'install_requires': ['requests', 'cryptography'],
    'extras_require': {'test': ['pytest']},
    'packages': ['gcs_signer'],
    'python_requires': '>=3.7',
    'scripts': [],
    'name': 'gcs_signer'
}

setup(**config)
