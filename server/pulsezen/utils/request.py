"""Small helpers for reading client metadata off a request."""


def client_ip(request):
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip()[:45] or None
    return (request.META.get("REMOTE_ADDR") or "")[:45] or None


def user_agent(request):
    return request.META.get("HTTP_USER_AGENT") or None
