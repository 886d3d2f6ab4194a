#!/usr/bin/env python
"""Utilitaire en ligne de commande Django pour SOPRIMEC."""
import os
import sys


def main():
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'soprimec.settings')
    from django.core.management import execute_from_command_line
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
