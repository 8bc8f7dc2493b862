import uvicorn
import sys
import os

# 确保打包后能正确找到模块
if getattr(sys, 'frozen', False):
    os.chdir(os.path.dirname(sys.executable))

if __name__ == "__main__":
    # 打包后不使用 reload
    is_dev = not getattr(sys, 'frozen', False)

    uvicorn.run(
        "order_finance.main:app",
        host="127.0.0.1",
        port=int(os.getenv("PORT", "8000")),
        reload=is_dev,
        log_level="info"
    )
