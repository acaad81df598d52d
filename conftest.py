import pytest

from marketbook import celery_app


@pytest.fixture(autouse=True)
def local_backends(settings):
    '''
    Celery tasks run inline and websocket groups live in process memory,
    whatever the environment points REDIS_HOST at.
    '''
    settings.CHANNEL_LAYERS = {
        'default': {
            'BACKEND': 'channels.layers.InMemoryChannelLayer',
        },
    }
    celery_app.conf.task_always_eager = True
    # The API test client touches a session on logout/force_authenticate;
    # the project installs no sessions app, so keep test sessions in cookies.
    settings.SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'
    yield
