import logging, os

# environment variables
LEX_URL = os.getenv("LEX_URL", "http://lexer-svc:8000/lex")
PARSE_URL = os.getenv("PARSE_URL", "http://parser-svc:8000/run")
EVALUATOR_URL = os.getenv("EVALUATOR_URL", "http://evaluator-svc:8000")
HTTP_TIMEOUT = float(os.getenv("CALC_HTTP_TIMEOUT", "10"))

# parentheses and unary operators deeper than this are rejected by the parser
MAX_DEPTH = int(os.getenv("CALC_MAX_DEPTH", "100"))

SOURCE_NAME = os.getenv("CALC_SOURCE_NAME", "stdin")
LOG_LEVEL = os.getenv("CALC_LOG_LEVEL", "WARNING")


def configure_logging(level=None):
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
