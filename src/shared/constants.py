"""
HeritageStamp 공유 상수 정의

칼만필터 파라미터, 기본 위치, 체크인 반경 등
프로젝트 전역에서 사용되는 불변 값들을 중앙 관리합니다.
"""

# ─── 지구 반지름 ───────────────────────────────────────────
EARTH_RADIUS_M = 6_371_000.0       # Haversine 기준 (6371 km)

# ─── 칼만필터 (경험적 상수, 변경 금지) ─────────────────────
KALMAN_INITIAL_COVARIANCE = 8000.0  # 초기 공분산 (정보 없음)
KALMAN_PROCESS_NOISE = 25.0         # 스텝당 고정 드리프트
KALMAN_ACCURACY_DAMPING = 3.0       # 기기 보고 정확도 / 3
KALMAN_MIN_MEASUREMENT_VAR = 30.0   # 측정 분산 하한

# ─── GPS 수집 정책 ────────────────────────────────────────
GPS_TARGET_ACCURACY_M = 50.0        # 이 값 이하이면 수렴으로 판단
GPS_MAX_SAMPLES = 10                # 초기 수집 최대 측정 횟수
GPS_CACHE_TTL_S = 300.0             # 마지막 위치 캐시 유효 시간 (5분)
SESSION_IDLE_TTL_S = 1800.0          # 추적 세션 유휴 만료 (캐시 TTL x 6)
GPS_COORD_DIGITS = 7                # 저장 시 소수점 자리수

# ─── 기본 위치 (서울시청) ──────────────────────────────────
DEFAULT_LATITUDE = 37.5665
DEFAULT_LONGITUDE = 126.9780
DEFAULT_ACCURACY_M = 1000.0

# ─── 근접 매칭 ────────────────────────────────────────────
CHECKIN_RADIUS_M = 200.0            # 카메라 체크인 인식 반경
NEARBY_LIMIT = 3                    # 메인 화면 주변 관광지 개수

# ─── 나침반 방위 ──────────────────────────────────────────
COMPASS_DIRECTIONS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")

# ─── 서버 설정 ────────────────────────────────────────────
DEV_PORT = 8000                    # 로컬 개발 포트
