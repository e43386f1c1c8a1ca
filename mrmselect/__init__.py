#!python


__project__ = "mrmselect"
__version__ = "0.3.0"
__license__ = "Apache"
__description__ = "Optimization based peak group selection for targeted (MRM) assays"
__author__ = "Mann Labs"
__author_email__ = "opensource@alphapept.com"
__keywords__ = [
    "bioinformatics",
    "mass spectrometry",
    "MRM",
    "linear programming",
]
__python_version__ = ">=3.10"
__classifiers__ = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "License :: OSI Approved :: Apache Software License",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]
__console_scripts__ = [
    "mrmselect=mrmselect.cli:run",
]
