class LeadRouterError(Exception):
    """Base class for all lead-routing domain exceptions.

    Every custom exception in this module inherits from here so that a
    single ``except LeadRouterError`` clause can catch any domain
    error.
    """

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(detail)


class LeadNotFoundError(LeadRouterError):
    """Raised when the lead to route does not exist in the company."""

    def __init__(self, detail: str = "Lead not found"):
        super().__init__(detail)


class AssigneeNotFoundError(LeadRouterError):
    """Raised when the resolved assignee is not a user of the lead's company.

    ``specific_user`` rules hand back their configured user id verbatim,
    so a stale rule can point at a deleted or foreign user.  The
    persistence step rejects it with this error.
    """

    def __init__(self, detail: str = "User not found"):
        super().__init__(detail)


class MalformedConditionsError(LeadRouterError):
    """Raised when a routing rule's stored conditions cannot be parsed.

    Never reaches API callers: the condition matcher catches it and
    treats the rule as non-matching.
    """

    def __init__(self, detail: str = "Invalid routing conditions"):
        super().__init__(detail)


class RoutingRuleNotFoundError(LeadRouterError):
    """Raised when a routing rule does not exist in the company."""

    def __init__(self, detail: str = "Routing Rule not found"):
        super().__init__(detail)
