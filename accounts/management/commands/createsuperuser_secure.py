import getpass

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

User = get_user_model()


class Command(BaseCommand):
    help = 'Create a LifeSource super administrator (requires SUPERUSER_SECRET_KEY)'

    def add_arguments(self, parser):
        parser.add_argument('--username')
        parser.add_argument('--email')
        parser.add_argument('--full-name', default='')

    def handle(self, *args, **options):
        expected_secret = getattr(settings, 'SUPERUSER_SECRET_KEY', None)
        if not expected_secret:
            raise CommandError('SUPERUSER_SECRET_KEY is not configured.')

        secret = getpass.getpass('Enter SUPERUSER SECRET KEY: ')
        if secret != expected_secret:
            raise CommandError('Invalid secret key. Cannot create super admin.')

        username = options['username'] or input('Username: ')
        email = options['email'] or input('Email: ')
        password = getpass.getpass('Password: ')

        if User.objects.filter(username=username).exists():
            raise CommandError('User with this username already exists.')
        if User.objects.filter(email__iexact=email).exists():
            raise CommandError('User with this email already exists.')

        User.objects.create_superuser(
            username=username,
            email=email,
            password=password,
            user_type=User.SUPER_ADMIN,
            full_name=options['full_name'],
            is_verified=True,
        )

        self.stdout.write(self.style.SUCCESS(f'Super admin {username} created successfully!'))
