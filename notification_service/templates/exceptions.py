"""Template rendering exceptions."""


class TemplateRenderError(Exception):
    """Raised when the document shell fails to render.

    Indicates a packaging or developer error (missing template file,
    undefined variable), never bad event data.
    """

    pass
