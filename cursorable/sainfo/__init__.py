""" SqlAlchemy info: inspect models and tables """
