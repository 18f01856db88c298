from fastapi import Request

from app.realtime.notifier import Notifier


def get_notifier(request: Request) -> Notifier:
    """The notifier wired at startup; tests override this dependency."""
    return request.app.state.notifier
