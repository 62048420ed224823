#!/usr/bin/env python
"""
Run the test suite of every portal app
Usage: python Doc/run_tests.py [app ...]
"""
import os
import sys

import django
from django.conf import settings
from django.test.utils import get_runner

APPS = [
    'erp_portal.core',
    'erp_portal.proxy',
    'erp_portal.accounts',
    'erp_portal.datagrid',
    'erp_portal.dashboard',
    'erp_portal.hr',
    'erp_portal.operations',
]

if __name__ == "__main__":
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'erp_portal.config.settings')
    django.setup()
    TestRunner = get_runner(settings)
    test_runner = TestRunner()
    labels = [f'erp_portal.{name}' for name in sys.argv[1:]] or APPS
    failures = test_runner.run_tests(labels)
    sys.exit(bool(failures))
