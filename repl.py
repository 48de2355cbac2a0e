from calc import run_line
from config import SOURCE_NAME, configure_logging
import sys

def main() -> int:
    configure_logging()
    print("Welcome to linecalc! Input command")
    while True:
        try:
            line = input(" >")
        except EOFError:
            print()
            return 0
        except KeyboardInterrupt:
            print()
            return 130
        print(run_line(line, SOURCE_NAME))

if __name__ == "__main__":
    sys.exit(main())
