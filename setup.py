#!/usr/bin/env python3
"""
SN76477 CSG Emulator - Setup Script

Pythonパッケージ設定ファイル
"""

from setuptools import setup, find_packages
import os

# README.mdを読み込み
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "SN76477 CSG Emulator - Tick-accurate emulation of the SN76477 complex sound generator"

# 依存関係を定義
INSTALL_REQUIRES = [
    'numpy>=1.19.0',
    'matplotlib>=3.3.0',
    'psutil>=5.7.0',
]

EXTRAS_REQUIRE = {
    'dev': [
        'pytest>=6.0.0',
        'pytest-cov>=2.10.0',
        'black>=21.0.0',
        'flake8>=3.8.0',
        'mypy>=0.800',
    ],
    'docs': [
        'sphinx>=3.0.0',
        'sphinx-rtd-theme>=0.5.0',
    ],
}

# 全ての追加依存関係
EXTRAS_REQUIRE['all'] = list(set(sum(EXTRAS_REQUIRE.values(), [])))

setup(
    # パッケージ基本情報
    name='pycsgemu',
    version='1.0.0',
    description='SN76477 CSG Emulator - Tick-accurate emulation of the SN76477 complex sound generator',
    long_description=read_readme(),
    long_description_content_type='text/markdown',

    # 作者・連絡先情報
    author='Siska-Tech',
    author_email='siska-tech@example.com',
    url='https://github.com/siska-tech/pycsgemu',

    # ライセンス
    license='MIT',

    # 分類
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Topic :: Multimedia :: Sound/Audio',
        'Topic :: Software Development :: Libraries :: Python Modules',
        'Topic :: System :: Emulators',
    ],

    # キーワード
    keywords='sn76477 csg emulator sound audio chip retro arcade',

    # パッケージ構成
    packages=find_packages(exclude=['tests*', 'docs*', 'examples*']),
    python_requires='>=3.8',

    # 依存関係
    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,

    # エントリーポイント
    entry_points={
        'console_scripts': [
            'pycsgemu-render=pycsgemu.cli:render_main',
            'pycsgemu-compare=pycsgemu.cli:compare_main',
            'pycsgemu-bench=pycsgemu.cli:bench_main',
        ],
    },

    # プロジェクトURL
    project_urls={
        'Source': 'https://github.com/siska-tech/pycsgemu',
        'Tracker': 'https://github.com/siska-tech/pycsgemu/issues',
    },

    # Zipファイルとして実行可能にするか
    zip_safe=False,

    include_package_data=True,
)
