"""Open a WebDriver session on the grid started by grid.py."""

import os

from selenium import webdriver

URL = os.environ.get("GRID_URL", "http://localhost:4444")


def create_session(browser: str = "chrome") -> webdriver.Remote:
    options = webdriver.FirefoxOptions() if browser == "firefox" else webdriver.ChromeOptions()
    return webdriver.Remote(command_executor=URL, options=options)
