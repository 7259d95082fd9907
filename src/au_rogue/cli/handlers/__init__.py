from .migrate import handle_migrate, print_summary
