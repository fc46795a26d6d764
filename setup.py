import platform
import sys
from setuptools import setup


def permit_setup():
    """
    Determines whether setup is permitted:
    - CPython >= 3.10+
    - PyPy >= 3.10+
    :return: True if setup is allowed
    """
    implementation = platform.python_implementation()
    v = sys.version_info  # pylint: disable=C0103, invalid-name

    return any([
        all([implementation == 'CPython', v.major == 3, v.minor >= 10]),
        all([implementation == 'PyPy', v.major == 3, v.minor >= 10]),
    ])

if permit_setup():
    setup(
        name='gain',
        version='1.0.0',
        description='Functional updates for immutable Python values',
        packages=['gain'],
        python_requires='>=3.10',
        install_requires=[],
        extras_require={
            'test': ['pytest'],
        },
    )
else:
    raise RuntimeError('CPython 3.10+ or PyPy 3.10+ required')
