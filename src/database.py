"""
数据库连接管理
"""
import os
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv
from models import Base

# 加载 .env 文件中的环境变量
load_dotenv()


class Database:
    """数据库连接管理类"""

    def __init__(self, database_url=None):
        """
        Args:
            database_url: 直接指定连接 URL（如 "sqlite://"），
                          为空时依次读取 DATABASE_URL 和 DB_* 环境变量
        """
        self.engine = None
        self.Session = None
        self._init_engine(database_url)

    @staticmethod
    def _build_url():
        """由环境变量构建连接 URL"""
        database_url = os.getenv('DATABASE_URL')
        if database_url:
            return database_url

        db_host = os.getenv('DB_HOST')
        db_port = os.getenv('DB_PORT', '3306')
        db_name = os.getenv('DB_NAME')
        db_user = os.getenv('DB_USER')
        db_password = os.getenv('DB_PASSWORD')

        # 验证配置完整性
        if not all([db_host, db_name, db_user, db_password]):
            raise ValueError(
                "数据库配置不完整！请检查 .env 文件是否包含 DATABASE_URL，或所有必需的配置：\n"
                "DB_HOST, DB_PORT, DB_NAME, DB_USER, DB_PASSWORD"
            )

        # 构建 MySQL 连接 URL
        return f"mysql+pymysql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"

    def _init_engine(self, database_url):
        """初始化数据库引擎"""
        database_url = database_url or self._build_url()

        options = {'echo': False}  # 设置为 True 可以看到所有 SQL 语句（调试用）
        if not database_url.startswith('sqlite'):
            options['pool_pre_ping'] = True   # 连接前先 ping，确保连接有效
            options['pool_recycle'] = 3600    # 1小时后回收连接

        self.engine = create_engine(database_url, **options)

        # 创建 Session 类
        self.Session = sessionmaker(bind=self.engine)

    def test_connection(self):
        """测试数据库连接"""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                print("✓ 数据库连接成功！")
                print(f"数据库类型: {self.engine.dialect.name}")
                return True
        except Exception as e:
            print(f"✗ 数据库连接失败: {e}")
            return False

    def create_tables(self):
        """创建所有数据表（仅创建不存在的表）"""
        try:
            Base.metadata.create_all(self.engine)
            print("✓ 数据表创建/确认成功！")
            # 验证关键表是否存在
            existing_tables = inspect(self.engine).get_table_names()
            expected_tables = [t.name for t in Base.metadata.sorted_tables]
            missing = [t for t in expected_tables if t not in existing_tables]
            if missing:
                print(f"⚠️ 以下表未创建成功: {missing}")
                return False
            print(f"  已确认 {len(expected_tables)} 张表存在: {expected_tables}")
            return True
        except Exception as e:
            print(f"✗ 创建数据表失败: {e}")
            return False

    def reset_tables(self):
        """删除并重建所有数据表（危险操作！会清空所有数据）"""
        try:
            print("正在删除所有表...")
            Base.metadata.drop_all(self.engine)
            print("正在重建所有表...")
            Base.metadata.create_all(self.engine)
            print("✓ 数据表重建成功！")
            return True
        except Exception as e:
            print(f"✗ 重建数据表失败: {e}")
            return False

    def get_session(self):
        """获取数据库会话"""
        return self.Session()
