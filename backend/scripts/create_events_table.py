from settings import settings
import psycopg

# gen_random_uuid() is built in from PostgreSQL 13
DDL = '''
CREATE TABLE IF NOT EXISTS events (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    name TEXT NOT NULL,
    description TEXT,
    start_time TIMESTAMP WITH TIME ZONE NOT NULL,
    end_time TIMESTAMP WITH TIME ZONE NOT NULL,
    location JSONB,
    background_style JSONB NOT NULL,
    is_public BOOLEAN DEFAULT TRUE,
    require_approval BOOLEAN DEFAULT FALSE,
    capacity INTEGER,
    created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT now(),
    updated_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS idx_events_created_at ON events (created_at);
'''

if __name__ == "__main__":
    print('Connecting to', settings.db_url)
    with psycopg.connect(settings.db_url, connect_timeout=settings.db_connect_timeout) as conn:
        with conn.cursor() as cur:
            cur.execute(DDL)
        conn.commit()
    print('DDL applied')
