from config import configure_logging, get_settings
from dashboard.ui import run_dashboard

if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    run_dashboard()
