# common/logging_factory.py

import logging
import os


class LoggerFactory:
    @staticmethod
    def get_logger(name: str) -> logging.Logger:
        logger = logging.getLogger(name)

        if not logger.handlers:
            logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
            formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

            # Console handler
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

            # File handler (solo se LOG_DIR è configurata)
            log_dir = os.getenv("LOG_DIR")
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
                file_handler = logging.FileHandler(os.path.join(log_dir, f"{name}.log"), encoding="utf-8")
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)

        return logger
