"""Form helpers shared by the HTTP tests."""


def register(client, username, password, follow_redirects=False):
    """POST the registration form."""
    return client.post(
        '/register',
        data={'username': username, 'password': password},
        follow_redirects=follow_redirects,
    )


def login(client, username, password, follow_redirects=False):
    """POST the login form."""
    return client.post(
        '/login',
        data={'username': username, 'password': password},
        follow_redirects=follow_redirects,
    )


def redirect_path(response):
    """Path part of a redirect's Location header."""
    from urllib.parse import urlsplit
    return urlsplit(response.headers['Location']).path
