from flask import current_app


def get_service(name):
    """Return a service instance registered on the current app"""
    return current_app.extensions['greenspark'][name]
