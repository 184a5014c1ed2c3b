# Contains the error types surfaced by the report pipeline


class ReportError(Exception):
    """Base class for failures that abort a whole report request."""


class ConfigurationMissingError(ReportError):
    """No configuration is loaded for the requested report name."""

    def __init__(self, report_name):
        super().__init__(f"No configuration found for report '{report_name}'")
        self.report_name = report_name


class InvalidDocumentError(ReportError):
    """The document root is neither a JSON object nor a JSON array."""


class TemplateNotFoundError(ReportError):
    """The template file named by the report configuration does not exist."""

    def __init__(self, template_path):
        super().__init__(f"Template file '{template_path}' does not exist")
        self.template_path = template_path
