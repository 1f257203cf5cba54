#!/usr/bin/env python
"""
招聘平台后端启动脚本

用法:
    python run.py                    # 默认启动 (127.0.0.1:8000)
    python run.py -p 8080            # 指定端口
    python run.py --host 0.0.0.0     # 允许外网访问
    python run.py --reload           # 开启热重载
"""
import argparse
import sys
from pathlib import Path

# 确保项目根目录在 Python 路径中
ROOT_DIR = Path(__file__).parent
sys.path.insert(0, str(ROOT_DIR))


def parse_args():
    """解析命令行参数"""
    parser = argparse.ArgumentParser(
        description="招聘平台后端启动脚本",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-p", "--port",
        type=int,
        default=8000,
        help="服务端口 (默认: 8000)"
    )
    parser.add_argument(
        "--host",
        type=str,
        default="127.0.0.1",
        help="服务地址 (默认: 127.0.0.1)"
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="开启热重载 (开发模式)"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="工作进程数 (默认: 1)"
    )
    return parser.parse_args()


def check_env():
    """检查环境配置，创建数据和上传目录"""
    env_file = ROOT_DIR / ".env"
    if not env_file.exists():
        print("⚠️  未找到 .env 文件，将使用默认配置")

    for name in ("data", "uploads/cvs"):
        directory = ROOT_DIR / name
        if not directory.exists():
            directory.mkdir(parents=True)
            print(f"✅ 目录已创建: {directory}")


def main():
    """主函数"""
    args = parse_args()

    print("=" * 50)
    print("  Student Job Board API")
    print("=" * 50)

    check_env()

    print(f"\n🚀 启动服务...")
    print(f"   地址: http://{args.host}:{args.port}")
    print(f"   文档: http://{args.host}:{args.port}/docs")
    print(f"   热重载: {'开启' if args.reload else '关闭'}")
    print(f"   工作进程: {args.workers}")
    print("\n" + "-" * 50 + "\n")

    import uvicorn
    try:
        uvicorn.run(
            "jobboard.main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            workers=args.workers if not args.reload else 1,
            log_level="info",
        )
    except KeyboardInterrupt:
        print("\n👋 服务已停止")


if __name__ == "__main__":
    main()
