import os

# configures default settings for tests, independently of the environment
os.environ["APP_ROUTE_DUPLICATES"] = "replace"
os.environ["APP_VIEW_CACHE"] = "1"
os.environ.pop("APP_JINJA_DEBUG", None)
