# type: ignore
from setuptools import find_packages, setup, Command

# Get VERSION constant from datafile_manager.version - we can't simply import that module because
# datafile_manager/__init__.py imports urllib3, which may not be installed yet.
version_module_globals = {}
with open('./datafile_manager/version.py') as f:
    exec(f.read(), version_module_globals)
datafile_manager_version = version_module_globals['VERSION']


def parse_requirements(filename):
    """ load requirements from a pip requirements file """
    with open(filename) as f:
        lineiter = (line.strip() for line in f)
        return [line for line in lineiter if line and not line.startswith("#")]


reqs = parse_requirements('requirements.txt')
testreqs = parse_requirements('test-requirements.txt')
optimizelyreqs = parse_requirements('optimizely-requirements.txt')


class PyTest(Command):
    user_options = []

    def initialize_options(self):
        pass

    def finalize_options(self):
        pass

    def run(self):
        import sys
        import subprocess
        errno = subprocess.call([sys.executable, '-m', 'pytest', 'datafile_manager/testing'])
        raise SystemExit(errno)


setup(
    name='datafile-manager',
    version=datafile_manager_version,
    packages=find_packages(include=['datafile_manager', 'datafile_manager.*']),
    description='Keeps a feature flag evaluation engine in sync with a remotely hosted datafile',
    long_description='Polls a feature flag datafile over HTTP and re-creates the evaluation engine whenever it changes',
    install_requires=reqs,
    python_requires='>=3.8',
    classifiers=[
        'Intended Audience :: Developers',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Topic :: Software Development',
        'Topic :: Software Development :: Libraries',
    ],
    extras_require={
        "optimizely": optimizelyreqs,
        "test": testreqs,
    },
    cmdclass={'test': PyTest},
)
