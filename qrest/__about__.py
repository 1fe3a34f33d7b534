__version__ = "0.1.0"
__description__ = "Typed resources for the REST API of a storage appliance"
__author__ = "qrest contributors"
