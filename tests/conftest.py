import os
import sys

import matplotlib

# テスト中は図を画面に出さない
matplotlib.use("Agg")

# プロジェクトのルートディレクトリをパスに追加
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
