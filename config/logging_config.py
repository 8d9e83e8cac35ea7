import logging
import logging.config
from config.main_config import LOG_FILE, LOG_LEVEL


class UserFilter(logging.Filter):
    def filter(self, record):
        if not hasattr(record, 'user'):
            record.user = 'SYSTEM'  # Set default user if not provided
        return True


def _logger(propagate: bool = False) -> dict:
    return {
        'handlers': ['file', 'console'],
        'level': LOG_LEVEL,
        'propagate': propagate,
    }


logging_config = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(user)s - %(message)s'
        },
    },
    'filters': {
        'user_filter': {
            '()': UserFilter,
        },
    },
    'handlers': {
        'file': {
            'level': LOG_LEVEL,
            'class': 'logging.FileHandler',
            'filename': LOG_FILE,
            'formatter': 'standard',
            'filters': ['user_filter']
        },
        'console': {
            'level': LOG_LEVEL,
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
            'filters': ['user_filter']
        },
    },
    'loggers': {
        'use_cases': _logger(),
        'repositories': _logger(),
        'external_apis': _logger(),
        'utils': _logger(),
        '': _logger(propagate=True),
    }
}

logging.config.dictConfig(logging_config)
