import os
from setuptools import setup, find_packages

install_requires = [
    'boto3',
    'click',
    'polling',
    'PyYAML'
]

test_requires = [
    'pytest'
]


# Utility function to read the README file.
# Used for the long_description.  It's nice, because now 1) we have a top level
# README file and 2) it's easier to type in the README file than to put a raw
# string in below ...
def read(fname):
    return open(os.path.join(os.path.dirname(__file__), fname)).read()


setup(
    name='ecs-codedeploy',
    version='1.0.0',
    author='Silvercar',
    author_email="info@silvercar.com",
    url='https://github.com/silvercar/ecs-codedeploy',
    description='Blue/green image deployments for AWS ECS services through CodeDeploy',
    license='Apache 2.0',
    keywords='aws ecs codedeploy',
    long_description=read('README.md'),
    install_requires=install_requires,
    tests_require=test_requires,
    extras_require={
        'test': test_requires
    },
    package_dir={'': 'src'},
    packages=find_packages('src'),
    include_package_data=True,
    entry_points={
        'console_scripts': [
            'ecs-codedeploy = ecs_codedeploy.main:cli'
        ]
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Topic :: Utilities',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
    ],
)
