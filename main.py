import os
import sys

# 설치 없이 실행할 수 있도록 src 경로 추가
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), "src"))

from ntag424_sdm.cli import main

if __name__ == "__main__":
    sys.exit(main())
