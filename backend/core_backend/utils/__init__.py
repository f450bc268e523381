"""
Utility functions for core_backend.
"""


def get_client_ip(request):
    """
    Extract the client IP from the request.

    Priority order:
    1. X-Forwarded-For LAST IP (when behind the load balancer)
    2. REMOTE_ADDR (fallback)

    The load balancer appends the address it actually saw, so the last entry
    is the one a client cannot spoof.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[-1].strip()

    return request.META.get('REMOTE_ADDR')
