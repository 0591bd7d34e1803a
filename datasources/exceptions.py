# datasources/exceptions.py

class DataSourceError(Exception):
    pass


class DataSourceUnavailable(DataSourceError):
    pass


class QueryTimeout(DataSourceError):
    pass


class InvalidQuery(DataSourceError):
    pass


class MalformedPayload(DataSourceError):
    pass


class ConfigurationMissing(DataSourceError):
    def __init__(self, setting: str, message: str | None = None):
        self.setting = setting
        super().__init__(message or f"{setting} not configured")


class BackendStartupTimeout(DataSourceError):
    pass
