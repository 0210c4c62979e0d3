"""Database schema initialization for the rate store."""

from __future__ import annotations


INIT_SCHEMA = """
PRAGMA foreign_keys = ON;

-- Employer groups
CREATE TABLE IF NOT EXISTS groups (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    number_of_classes INTEGER NOT NULL DEFAULT 1
);

-- Group plans and Medicare plans
CREATE TABLE IF NOT EXISTS plans (
    id TEXT PRIMARY KEY,
    group_id TEXT,
    family TEXT NOT NULL DEFAULT 'group',
    name TEXT NOT NULL,
    plan_type TEXT NOT NULL,
    effective_date DATE,
    termination_date DATE,
    contribution_type TEXT,
    contribution_value TEXT,
    spouse_contribution_value TEXT,
    child_contribution_value TEXT,
    FOREIGN KEY (group_id) REFERENCES groups(id)
);

-- Age bands or composite tiers
CREATE TABLE IF NOT EXISTS plan_options (
    id TEXT PRIMARY KEY,
    plan_id TEXT NOT NULL,
    label TEXT NOT NULL,
    FOREIGN KEY (plan_id) REFERENCES plans(id) ON DELETE CASCADE
);

-- Time-bounded rates, attached to an option or directly to a Medicare plan
CREATE TABLE IF NOT EXISTS rates (
    id TEXT PRIMARY KEY,
    plan_id TEXT NOT NULL,
    plan_option_id TEXT,
    rate TEXT NOT NULL,
    start_date DATE NOT NULL,
    end_date DATE,
    contribution_type TEXT,
    class_amounts TEXT,
    FOREIGN KEY (plan_id) REFERENCES plans(id) ON DELETE CASCADE,
    FOREIGN KEY (plan_option_id) REFERENCES plan_options(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS participants (
    id TEXT PRIMARY KEY,
    group_id TEXT,
    name TEXT NOT NULL,
    dob DATE,
    hire_date DATE,
    termination_date DATE,
    class_number INTEGER,
    FOREIGN KEY (group_id) REFERENCES groups(id)
);

CREATE TABLE IF NOT EXISTS dependents (
    id TEXT PRIMARY KEY,
    participant_id TEXT NOT NULL,
    name TEXT,
    relationship TEXT NOT NULL,
    dob DATE,
    FOREIGN KEY (participant_id) REFERENCES participants(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS enrollments (
    id TEXT PRIMARY KEY,
    participant_id TEXT NOT NULL,
    plan_id TEXT NOT NULL,
    plan_option_id TEXT,
    dependent_id TEXT,
    coverage TEXT,
    effective_date DATE NOT NULL,
    termination_date DATE,
    rate_override TEXT,
    primary_enrollment_id TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (participant_id) REFERENCES participants(id) ON DELETE CASCADE,
    FOREIGN KEY (plan_id) REFERENCES plans(id),
    FOREIGN KEY (plan_option_id) REFERENCES plan_options(id),
    FOREIGN KEY (dependent_id) REFERENCES dependents(id) ON DELETE CASCADE,
    FOREIGN KEY (primary_enrollment_id) REFERENCES enrollments(id) ON DELETE CASCADE
);

-- Append-only rate history per enrollment
CREATE TABLE IF NOT EXISTS enrollment_rate_history (
    id TEXT PRIMARY KEY,
    enrollment_id TEXT NOT NULL,
    rate_id TEXT NOT NULL,
    start_date DATE NOT NULL,
    end_date DATE,
    rate_amount TEXT NOT NULL,
    contribution_type TEXT,
    contribution_value TEXT,
    employer_amount TEXT NOT NULL,
    employee_amount TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (enrollment_id) REFERENCES enrollments(id) ON DELETE CASCADE,
    FOREIGN KEY (rate_id) REFERENCES rates(id)
);

CREATE TABLE IF NOT EXISTS renewals (
    id TEXT PRIMARY KEY,
    group_id TEXT,
    renewal_date DATE NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (group_id) REFERENCES groups(id)
);

CREATE TABLE IF NOT EXISTS renewal_plans (
    renewal_id TEXT NOT NULL,
    plan_id TEXT NOT NULL,
    PRIMARY KEY (renewal_id, plan_id),
    FOREIGN KEY (renewal_id) REFERENCES renewals(id) ON DELETE CASCADE,
    FOREIGN KEY (plan_id) REFERENCES plans(id)
);

-- Indexes
CREATE INDEX IF NOT EXISTS idx_plans_group ON plans(group_id);
CREATE INDEX IF NOT EXISTS idx_options_plan ON plan_options(plan_id);
CREATE INDEX IF NOT EXISTS idx_rates_option ON rates(plan_option_id);
CREATE INDEX IF NOT EXISTS idx_rates_plan ON rates(plan_id);
CREATE INDEX IF NOT EXISTS idx_dependents_participant ON dependents(participant_id);
CREATE INDEX IF NOT EXISTS idx_enrollments_plan ON enrollments(plan_id);
CREATE INDEX IF NOT EXISTS idx_enrollments_participant ON enrollments(participant_id);
CREATE INDEX IF NOT EXISTS idx_history_enrollment ON enrollment_rate_history(enrollment_id);

-- One open enrollment per person and plan
CREATE UNIQUE INDEX IF NOT EXISTS uq_enrollment_open
    ON enrollments(participant_id, plan_id, COALESCE(dependent_id, ''))
    WHERE termination_date IS NULL;

-- At most one open history entry per enrollment, one entry per start date
CREATE UNIQUE INDEX IF NOT EXISTS uq_history_open
    ON enrollment_rate_history(enrollment_id) WHERE end_date IS NULL;
CREATE UNIQUE INDEX IF NOT EXISTS uq_history_start
    ON enrollment_rate_history(enrollment_id, start_date);
"""
